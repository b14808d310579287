"""Commands that manage stored publisher credentials."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from vxp_core.api import vxpcommand
from vxp_core.errors import UserAbortedError
from vxp_core.validation import validate_publisher

from .commands import _AppCommand


@vxpcommand(name="login")
class LoginCommand(_AppCommand):
    """Store a personal access token for a publisher."""

    prefix = "login"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("publisher", help="Publisher name")

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        name = validate_publisher(str(args.publisher))
        if app.store.find_publisher(name) is not None:
            answer = app.reader(f"Publisher '{name}' is already known. Overwrite its PAT? [y/N] ")
            if answer.strip().lower() != "y":
                raise UserAbortedError()
        pat = app.secret_reader("Personal Access Token: ")
        app.store.add_publisher(name, pat)
        self._say(f"credentials for '{name}' saved")
        return 0


@vxpcommand(name="logout")
class LogoutCommand(_AppCommand):
    """Forget the stored token of a publisher."""

    prefix = "logout"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("publisher", help="Publisher name")

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        app.store.delete_publisher(str(args.publisher))
        self._say(f"credentials for '{args.publisher}' removed")
        return 0


@vxpcommand(name="ls-publishers")
class ListPublishersCommand(_AppCommand):
    """List publishers with stored credentials."""

    prefix = "ls-publishers"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        return None

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        publishers = app.store.list_publishers()
        if not publishers:
            self._say("no publishers stored")
            return 0
        for publisher in publishers:
            print(publisher.name)
        return 0
