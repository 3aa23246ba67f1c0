"""Allow ``python -m savelink``."""

from savelink.cli import app

if __name__ == "__main__":
    app(prog_name="savelink")
