"""Read-only remote object store abstraction used by the reconciler."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import BinaryIO


class RemoteStore(ABC):
    """Minimal read-only interface over a bucket/key object store."""

    bucket: str = ""

    @abstractmethod
    def iter_pages(self) -> Iterator[list[str]]:
        """Yield the object keys of the store one listing page at a time.

        Implementations raise ListingError on any failure.
        """

    @abstractmethod
    def open_object(self, key: str) -> AbstractContextManager[BinaryIO]:
        """Open a single object for streaming reads.

        Implementations raise FetchError on any failure.
        """

    def iter_keys(self) -> Iterator[str]:
        """Yield every key across all pages."""
        for page in self.iter_pages():
            yield from page

    def list_keys(self) -> set[str]:
        """Enumerate the store to completion.

        A partial result is never returned: either every page was read, or
        the error propagates.
        """
        return set(self.iter_keys())
