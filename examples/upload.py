"""
Example: upload form fields and files as multipart/form-data.

    python examples/upload.py https://httpbin.org/post -f title=hello -a report.txt
"""

import logging
import mimetypes
import os
from contextlib import ExitStack

import click

from formpost import HTTPTransport, MultipartBuilder


@click.command()
@click.argument("url")
@click.option("--field", "-f", "fields", multiple=True, help="name=value form field")
@click.option("--attach", "-a", "paths", multiple=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--method", default="POST", show_default=True)
@click.option("--timeout", default=10.0, show_default=True)
@click.option("--verbose", "-v", is_flag=True, help="Log the outgoing body and response")
def main(url, fields, paths, method, timeout, verbose) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    builder = MultipartBuilder(files_name="files")
    for field in fields:
        name, _, value = field.partition("=")
        builder.add_field(name, value)

    with ExitStack() as stack:
        for path in paths:
            fh = stack.enter_context(open(path, "rb"))
            ctype = mimetypes.guess_type(path)[0] or "application/octet-stream"
            builder.add_file(fh, "file", ctype, os.path.basename(path))
        response = builder.upload(HTTPTransport(timeout=timeout), url, method)

    click.secho(f"Uploaded to {url}", fg="green")
    click.echo(response.decode("utf-8", errors="replace"))


if __name__ == "__main__":
    main()
