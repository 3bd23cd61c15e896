import nox

PYTHON_VERSION = "3.11"


@nox.session(python=PYTHON_VERSION)
def tests(session):
    session.install("-e", ".[test]")
    session.run("pytest", "tests/unit", "--ignore=tests/unit/test_migrations.py")


@nox.session(python=PYTHON_VERSION)
def migrations(session):
    session.install("-e", ".[test]")
    session.run("pytest", "tests/unit/test_migrations.py")


@nox.session(python=PYTHON_VERSION)
def integration(session):
    session.install("-e", ".[test]")
    session.run("pytest", "tests/integration")


@nox.session(python=PYTHON_VERSION)
def lint(session):
    session.install("ruff")
    session.run("ruff", "check", ".")


@nox.session(python=PYTHON_VERSION)
def format(session):
    session.install("black", "ruff")
    session.run("black", "--check", "api", "common", "packages")
    session.run("ruff", "check", ".")
