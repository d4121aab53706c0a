"""Allow running shoprec as a module: python -m shoprec"""

from shoprec.cli import app

if __name__ == "__main__":
    app()
