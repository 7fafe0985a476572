import nox

nox.options.sessions = ["lint", "format", "type_hints", "unit_tests", "smoke_tests"]


@nox.session(reuse_venv=True, python="3.9")
def lint(session: nox.Session) -> None:
    """
    Lint the project's codebase.

    Args:
        session (nox.Session): The Nox session being run, providing context and methods for session actions.
    """
    session.install("ruff==0.4.8")
    session.run("ruff", "check", "--fix")


@nox.session(reuse_venv=True, python="3.9")
def format(session: nox.Session) -> None:
    """
    Format the project's codebase with ruff.

    Args:
        session (nox.Session): The Nox session being run, providing context and methods for session actions.
    """
    session.install("ruff==0.4.8")
    session.run("ruff", "format")


@nox.session(reuse_venv=True, python="3.9")
def type_hints(session: nox.Session) -> None:
    """
    Check type hints of the StarFinder package.

    Args:
        session (nox.Session): The Nox session being run, providing context and methods for session actions.
    """
    session.install("-r", "requirements.txt")
    session.install("-r", "requirements_dev.txt")
    session.run("mypy", "--install-types", "--non-interactive", "StarFinder")


@nox.session(reuse_venv=True, python="3.9")
def unit_tests(session: nox.Session) -> None:
    """
    Run the project's unit tests.

    These check the tokenizer, decoder, filter, rasterizer, config and
    logging modules in isolation.

    Args:
        session (nox.Session): The Nox session being run, providing context and methods for session actions.
    """
    session.install("-r", "requirements.txt")
    session.install("-r", "requirements_dev.txt")
    session.run("pytest", "-m", "unit")


@nox.session(reuse_venv=True, python="3.9")
def smoke_tests(session: nox.Session) -> None:
    """
    Run the project's smoke tests.

    These render small catalogs end to end through the command line entry point.

    Args:
        session (nox.Session): The Nox session being run, providing context and methods for session actions.
    """
    session.install("-r", "requirements.txt")
    session.install("-r", "requirements_dev.txt")
    session.run("pytest", "-m", "smoke")
