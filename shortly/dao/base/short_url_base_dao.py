"""Storage contract for short URL mappings

Handlers and the export task talk to ShortURLBaseDAO only, so the Redis
implementation can be swapped for in-memory fakes in tests. Mappings are
permanent: there is no delete operation.

    >>> dao = ShortURLRedisDAO(prefix='shortly:dev')
    >>> dao.insert(ShortURLModel(target='https://example.com/blog/article-123', shortcode='a1b2c3'))
    >>> [url.shortcode for url in dao.all()]
    ['a1b2c3']

Every method raises DataStoreError when the backing store fails or returns
a record it cannot decode.
"""

from abc import ABC, abstractmethod

from shortly.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Store a new mapping and return self.

        Raises:
            ShortURLAlreadyExistsError:
                If the short code is taken.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Look a mapping up by short code; ShortURLNotFoundError if absent."""
        pass

    @abstractmethod
    def find(self, target: str, **kwargs) -> ShortURLModel:
        """Return the mapping already created for a long URL; ShortURLNotFoundError if none."""
        pass

    @abstractmethod
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Every stored mapping in insertion order, possibly empty."""
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Current value of the shortcode counter, incremented first when `increment` is set."""
        pass
