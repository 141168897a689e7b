"""
Import workflow built on a handler pipeline.

Raw sources (URLs, archives, files) run through one chain of handlers.
URLs are downloaded and re-enter the chain as files, archives fan out
into one nested run per member, DICOM files are collected into the shared
extra data for a later series build, and other images load directly.

Run:
    PYTHONPATH=src python examples/import_sources.py
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace

from pyconduit import Continue, ExecutionContext, Pipeline, merge_many


@dataclass(frozen=True)
class DataSource:
    """A source to import; exactly one of uri, archive or file name is set."""

    name: str
    uri: str | None = None
    file_type: str | None = None
    payload: bytes = b""
    members: tuple["DataSource", ...] = ()


@dataclass
class LoadedImage:
    """Result of importing a single (non-DICOM) image."""

    name: str
    size: int


@dataclass
class ImportContext:
    """Extra data shared by every run of one import."""

    dicom_sources: list[DataSource] = field(default_factory=list)
    downloads: dict[str, bytes] = field(default_factory=dict)


REMOTE = {
    "https://example.org/brain.nii": b"\x5c\x01" * 64,
    "https://example.org/study.zip": b"PK",
}


async def download_url(source: DataSource, ctx: ExecutionContext):
    """Download a URL and re-run the chain on the downloaded file."""
    if source.uri is None:
        return source

    await asyncio.sleep(0.01)
    if source.uri not in REMOTE:
        raise ConnectionError(f"Could not download URL {source.uri}")

    body = REMOTE[source.uri]
    ctx.extra.downloads[source.uri] = body

    file_type = "application/zip" if source.uri.endswith(".zip") else "application/nifti"
    members = _fake_members() if file_type == "application/zip" else ()
    ctx.launch(replace(source, uri=None, file_type=file_type, payload=body, members=members))
    return ctx.terminate()


def extract_archive(source: DataSource, ctx: ExecutionContext):
    """Launch one nested run per archive member."""
    if source.file_type != "application/zip":
        return source

    for member in source.members:
        ctx.launch(member)
    return ctx.terminate()


def handle_dicom_file(source: DataSource, ctx: ExecutionContext):
    """Collect DICOM files; they are built into series after the import."""
    if source.file_type == "application/dicom":
        ctx.extra.dicom_sources.append(source)
        return ctx.terminate()
    return Continue(source)


def load_image(source: DataSource, ctx: ExecutionContext):
    if source.file_type in ("application/nifti", "image/png"):
        return ctx.terminate(LoadedImage(name=source.name, size=len(source.payload)))
    return source


def unhandled(source: DataSource, ctx: ExecutionContext):
    raise TypeError(f"Unhandled file type {source.file_type!r} for {source.name}")


def _fake_members() -> tuple[DataSource, ...]:
    dicom = tuple(
        DataSource(name=f"IM{i:04d}.dcm", file_type="application/dicom", payload=b"DICM")
        for i in range(3)
    )
    return dicom + (
        DataSource(name="preview.png", file_type="image/png", payload=b"\x89PNG"),
        DataSource(name="notes.docx", file_type="application/msword"),
    )


async def main():
    """Import a batch of sources and report what was loaded."""
    logging.basicConfig(level=logging.INFO)

    pipeline = Pipeline(
        [download_url, extract_archive, handle_dicom_file, load_image, unhandled],
        name="import",
    )

    sources = [
        DataSource(name="brain", uri="https://example.org/brain.nii"),
        DataSource(name="study", uri="https://example.org/study.zip"),
        DataSource(name="missing", uri="https://example.org/missing.nii"),
    ]

    extra = ImportContext()
    results = await pipeline.execute_many(sources, extra, limit=2)
    summary = merge_many(results)

    print(f"Import ok: {summary.ok}")
    for image in summary.data:
        print(f"  loaded {image.name} ({image.size} bytes)")
    print(f"  DICOM files collected for series build: {len(extra.dicom_sources)}")

    for error in summary.errors:
        trail = " <- ".join(source.name for source in error.input_data_stack_trace)
        print(f"  error: {error.message} [{trail}]")


if __name__ == "__main__":
    asyncio.run(main())
