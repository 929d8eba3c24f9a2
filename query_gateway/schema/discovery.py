"""
Schema discovery coordinator.

Enumerates queryable time-series collections and probes each one for its
tag keys and their distinct values, so the query editor can offer options
without a static schema.
"""

import logging
from typing import Any, List, Mapping, Optional

from bson.errors import BSONError
from pymongo.errors import PyMongoError

from query_gateway.core.errors import StoreUnavailableError
from query_gateway.core.interfaces import ISchemaProbe
from query_gateway.core.models import (
    LabelValue,
    MetricDescriptor,
    MetricsRequest,
    TagOption,
)

logger = logging.getLogger(__name__)

TIMESERIES_TYPE = "timeseries"
TAGS_FIELD = "tags"


class SchemaDiscovery:
    """
    Coordinates metadata discovery.

    Every call probes the store again; nothing is cached between requests.
    A failure on any collection aborts the whole discovery call.
    """

    def __init__(self, probe: ISchemaProbe):
        """
        Initialize schema discovery.

        Args:
            probe: Store-specific schema probe implementation
        """
        self.probe = probe

    def discover(self, request: Optional[MetricsRequest] = None) -> List[MetricDescriptor]:
        """
        Describe every time-series collection and its tag options.

        Args:
            request: Discovery request; its payload is accepted but unused

        Returns:
            One MetricDescriptor per time-series collection

        Raises:
            StoreUnavailableError: If any probe fails
        """
        if request is not None:
            logger.debug("handling metrics request for %r", request.metric)

        try:
            collections = self.probe.list_collections()
        except (PyMongoError, BSONError) as e:
            logger.error("couldn't retrieve the collections: %s", e)
            raise StoreUnavailableError(f"couldn't retrieve the collections: {e}") from e

        descriptors: List[MetricDescriptor] = []
        for name in self.timeseries_names(collections):
            descriptors.append(self.describe(name))

        return descriptors

    @staticmethod
    def timeseries_names(collections: List[Mapping[str, Any]]) -> List[str]:
        """Keep the names of collections flagged as time-series."""
        names = []
        for collection in collections:
            if collection.get("type") != TIMESERIES_TYPE:
                continue
            name = collection.get("name")
            if not isinstance(name, str):
                continue
            names.append(name)
        return names

    def describe(self, collection: str) -> MetricDescriptor:
        """Probe one collection's tag keys and their distinct values."""
        try:
            tags = self.probe.latest_tags(collection)
        except (PyMongoError, BSONError) as e:
            logger.error("couldn't retrieve the tags of %s: %s", collection, e)
            raise StoreUnavailableError(
                f"couldn't retrieve the tags of {collection!r}: {e}"
            ) from e

        if tags is None:
            logger.debug("collection %s holds no documents", collection)
            return MetricDescriptor(name=collection)

        if not isinstance(tags, Mapping):
            logger.debug("newest tags of %s are not a mapping: %r", collection, tags)
            return MetricDescriptor(name=collection)

        logger.debug("discovered tag keys for %s: %s", collection, list(tags))

        tag_options = []
        for key in tags:
            field_path = f"{TAGS_FIELD}.{key}"
            try:
                values = self.probe.distinct_values(collection, field_path)
            except (PyMongoError, BSONError) as e:
                logger.error("couldn't get distinct values of %s.%s: %s", collection, field_path, e)
                raise StoreUnavailableError(
                    f"couldn't get distinct values of {field_path!r} in {collection!r}: {e}"
                ) from e
            tag_options.append(TagOption(key=str(key), value_options=self.label_values(values)))

        return MetricDescriptor(name=collection, tag_options=tag_options)

    @staticmethod
    def label_values(values: List[Any]) -> List[LabelValue]:
        """
        Wrap distinct values into label/value pairs.

        Strings map to themselves; string-keyed mappings contribute one option
        per key. Other shapes carry no usable label and are skipped.
        """
        options = []
        for value in values:
            if isinstance(value, str):
                options.append(LabelValue(label=value, value=value))
            elif isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
                options.extend(LabelValue(label=k, value=k) for k in value)
            else:
                logger.debug("skipping distinct value %r of type %s", value, type(value).__name__)
        return options
