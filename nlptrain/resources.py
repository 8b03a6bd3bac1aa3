"""
Resources: Opening of line-oriented training resources.

A resource is a file path, a text stream or a binary stream. Files opened
here are closed when the training call ends; streams handed in by the
caller are left open.
"""

import io
import os
from contextlib import contextmanager
from typing import Iterable, Iterator, TextIO, Union

from .errors import ResourceUnreadable

ENCODING = 'utf-8'

Resource = Union[str, os.PathLike, TextIO, io.IOBase]


def _is_path(resource) -> bool:
    return isinstance(resource, (str, os.PathLike))


def _is_binary_stream(resource) -> bool:
    if isinstance(resource, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return 'b' in getattr(resource, 'mode', '')


def describe(resource) -> str:
    """Short human-readable name of a resource for messages."""
    if _is_path(resource):
        return os.fspath(resource)
    return getattr(resource, 'name', None) or type(resource).__name__


@contextmanager
def open_text(resource: Resource) -> Iterator[TextIO]:
    """
    Open a resource for line-oriented text reading.

    Decoding failures raised while the caller consumes the stream are
    reported as ResourceUnreadable as well.

    Args:
        resource: File path, text stream or binary stream

    Yields:
        A text stream decoded as UTF-8
    """
    wrapper = None
    if _is_path(resource):
        try:
            handle = open(resource, 'r', encoding=ENCODING)
        except OSError as e:
            raise ResourceUnreadable(
                f"cannot open training resource {describe(resource)}: {e}") from e
    elif _is_binary_stream(resource):
        wrapper = handle = io.TextIOWrapper(resource, encoding=ENCODING)
    elif hasattr(resource, 'read'):
        handle = resource
    else:
        raise ResourceUnreadable(
            f"unsupported training resource type: {type(resource).__name__}")

    try:
        yield handle
    except UnicodeDecodeError as e:
        raise ResourceUnreadable(
            f"training resource {describe(resource)} is not valid {ENCODING}: {e}") from e
    except OSError as e:
        raise ResourceUnreadable(
            f"cannot read training resource {describe(resource)}: {e}") from e
    finally:
        if wrapper is not None:
            wrapper.detach()
        elif _is_path(resource):
            handle.close()


@contextmanager
def open_bytes(resource: Resource) -> Iterator[io.IOBase]:
    """
    Open a resource as a byte channel.

    Args:
        resource: File path or stream

    Yields:
        The opened byte stream (or the caller's stream)
    """
    if _is_path(resource):
        try:
            handle = open(resource, 'rb')
        except OSError as e:
            raise ResourceUnreadable(
                f"cannot open training resource {describe(resource)}: {e}") from e
    elif hasattr(resource, 'read'):
        handle = resource
    else:
        raise ResourceUnreadable(
            f"unsupported training resource type: {type(resource).__name__}")

    try:
        yield handle
    except OSError as e:
        raise ResourceUnreadable(
            f"cannot read training resource {describe(resource)}: {e}") from e
    finally:
        if _is_path(resource):
            handle.close()


def plain_text_by_line(handle: Iterable) -> Iterator[str]:
    """
    Yield the lines of an open resource without their line terminators.

    Byte lines are decoded explicitly as UTF-8.
    """
    for raw in handle:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode(ENCODING)
            except UnicodeDecodeError as e:
                raise ResourceUnreadable(
                    f"training resource is not valid {ENCODING}: {e}") from e
        yield raw.rstrip('\r\n')
