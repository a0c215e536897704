"""Allow ``python -m uls_exporter``"""

from uls_exporter.cli.main import app

if __name__ == "__main__":
    app()
