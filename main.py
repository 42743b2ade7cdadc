"""
A tiny version-control front end driven by helmsman.

    python main.py status
    python main.py ci --path=program.py -m:"first draft"
    python main.py propset svn:ignore "*.pyc" /path:.
    python main.py diff a.py b.py
"""
import sys
from typing import Annotated

from rich.console import Console

from helmsman import ShortName, main

__version__ = "1.0.0"
__copyright__ = "Copyright (c) helmsman contributors"

console = Console()


class Svn:
    """A pretend subversion client."""

    @ShortName("st")
    def status(self, verbose: bool = False):
        """Show the working copy status."""
        console.print("nothing to report" if not verbose else "nothing to report, verbosely")

    @ShortName("ci")
    def commit(
            self,
            path: Annotated[str, ShortName("p"), "file or directory to commit"],
            message: Annotated[str, ShortName("m"), "log message"],
    ):
        """Send changes from the working copy to the repository."""
        console.print(f"committed {path!r}: {message}")

    def propset(self, name: str, value: str, path: str = "."):
        """Set a property on a path."""
        console.print(f"{name}={value!r} on {path!r}")

    def diff(self, *files: str):
        """Display local modifications."""
        console.print(f"diff of {', '.join(files) or 'everything'}")

    def resolve(self, accept: Annotated[str, "which version wins"], *files: str):
        """Resolve conflicts on working copy files."""
        console.print(f"resolved {', '.join(files)} using {accept!r}")


if __name__ == '__main__':
    sys.exit(main(Svn()))
