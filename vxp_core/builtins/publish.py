"""Commands that build, publish, list and unpublish extensions."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from vxp_core.api import vxpcommand
from vxp_core.events import Event
from vxp_core.packager import PackOptions, pack
from vxp_core.publish import (
    PublishOptions,
    UnpublishOptions,
    list_extensions,
    publish,
    unpublish,
)

from .commands import _AppCommand


def _add_base_url_arguments(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--baseContentUrl",
        "--base-content-url",
        dest="base_content_url",
        help="Prepend relative links in README.md with this URL",
    )
    parser.add_argument(
        "--baseImagesUrl",
        "--base-images-url",
        dest="base_images_url",
        help="Prepend relative image links in README.md with this URL",
    )


@vxpcommand(name="package")
class PackageCommand(_AppCommand):
    """Package the extension in the working directory into a .vsix archive."""

    prefix = "package"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("-o", "--out", dest="out", help="Output .vsix path")
        parser.add_argument("--cwd", help="Extension directory (default: current folder)")
        _add_base_url_arguments(parser)

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        cwd = app.resolve_cwd(getattr(args, "cwd", None))
        out = getattr(args, "out", None)
        result = pack(
            PackOptions(
                cwd=cwd,
                package_path=app.resolve_cwd(out) if out else None,
                base_content_url=getattr(args, "base_content_url", None),
                base_images_url=getattr(args, "base_images_url", None),
            )
        )
        manifest = result.manifest
        app.events.emit(
            "packaged",
            {
                "id": manifest.id,
                "version": manifest.version,
                "package_path": str(result.package_path),
            },
        )
        self._say(f"Created: {result.package_path}")
        return 0


@vxpcommand(name="publish")
class PublishCommand(_AppCommand):
    """Publish an extension to the gallery.

    Either build from the working directory, optionally bumping the version
    first (major, minor, patch or an explicit version), or upload a prebuilt
    .vsix with --packagePath.
    """

    prefix = "publish"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--version",
            dest="version",
            help="Bump the version before publishing: major, minor, patch or X.Y.Z",
        )
        parser.add_argument(
            "--packagePath",
            "--package-path",
            dest="package_path",
            help="Publish this prebuilt .vsix instead of packaging the working directory",
        )
        parser.add_argument("-p", "--pat", dest="pat", help="Personal access token")
        parser.add_argument("--cwd", help="Extension directory (default: current folder)")
        _add_base_url_arguments(parser)

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        package_path = getattr(args, "package_path", None)
        options = PublishOptions(
            cwd=app.resolve_cwd(getattr(args, "cwd", None)),
            package_path=app.resolve_cwd(package_path) if package_path else None,
            version=getattr(args, "version", None),
            pat=getattr(args, "pat", None),
            base_content_url=getattr(args, "base_content_url", None),
            base_images_url=getattr(args, "base_images_url", None),
        )

        def report(event: Event) -> None:
            self._say(f"Successfully published {event.payload['id']}@{event.payload['version']}!")

        app.events.on("published", report)
        try:
            publish(options, store=app.store, gallery_factory=app.gallery, events=app.events)
        finally:
            app.events.off("published", report)
        return 0


@vxpcommand(name="list")
class ListCommand(_AppCommand):
    """List the extensions a publisher has in the gallery."""

    prefix = "list"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("publisher", help="Publisher name")

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        extensions = list_extensions(
            str(args.publisher),
            store=app.store,
            gallery_factory=app.gallery,
            installation_target=app.settings.installation_target,
            events=app.events,
        )
        if not extensions:
            self._say(f"no extensions published by {args.publisher}")
            return 0
        for extension in extensions:
            print(f"{extension.name} @ {extension.latest_version}")
        return 0


@vxpcommand(name="unpublish")
class UnpublishCommand(_AppCommand):
    """Delete an extension from the gallery after confirmation."""

    prefix = "unpublish"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--id",
            dest="id",
            help="Extension id as publisher.name (default: read package.json)",
        )
        parser.add_argument("-p", "--pat", dest="pat", help="Personal access token")
        parser.add_argument("--cwd", help="Extension directory (default: current folder)")

    def run(self, args: Namespace) -> int:
        app = self._require_app()
        options = UnpublishOptions(
            cwd=app.resolve_cwd(getattr(args, "cwd", None)),
            id=getattr(args, "id", None),
            pat=getattr(args, "pat", None),
        )

        def report(event: Event) -> None:
            self._say(f"Successfully deleted {event.payload['id']}!")

        app.events.on("unpublished", report)
        try:
            unpublish(
                options,
                store=app.store,
                gallery_factory=app.gallery,
                reader=app.reader,
                events=app.events,
            )
        finally:
            app.events.off("unpublished", report)
        return 0
