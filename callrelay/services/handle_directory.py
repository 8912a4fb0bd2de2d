"""Directory Handlers — search, indexed restaurants and monitoring diagnostics (3 methods).

Invariants:
    - search_restaurants records {id, name, phone} of every result in the PhoneDirectory
    - Search failures become descriptive strings, never exceptions
"""

import logging

from callrelay.core.boundary_protocols import SearchProvider
from callrelay.core.errors import SearchProviderError
from callrelay.core.phone_directory import PhoneDirectory
from callrelay.core.status_format import format_directory_listing
from callrelay.services.status_tracker import StatusTracker

logger = logging.getLogger(__name__)

DIRECTORY_LISTING_LIMIT = 20


class DirectoryHandlers:

    def __init__(
        self,
        directory: PhoneDirectory,
        tracker: StatusTracker,
        search: SearchProvider | None = None,
    ):
        self.directory = directory
        self.tracker = tracker
        self.search = search

    async def search_restaurants(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        if self.search is None:
            return "Error: Restaurant search is not configured."
        term = str(args.get("term") or "").strip()
        location = str(args.get("location") or "").strip()
        if not term or not location:
            return "Error: Both a search term and a location are required."
        try:
            limit = int(args.get("limit") or 5)
        except (TypeError, ValueError):
            limit = 5
        try:
            results = await self.search.search(term, location, limit)
        except SearchProviderError as e:
            logger.warning(e.message, extra={"channel": channel})
            return f"Error: {e.message}"

        added = self.directory.record_results(user_id, results)
        logger.info(
            f"Indexed {added} new restaurants from search",
            extra={"channel": channel},
        )
        if not results:
            return f'No restaurants found for "{term}" near {location}.'
        lines = [
            f"{i}. {r['name']} | Phone: {r.get('phone') or 'n/a'}"
            f" | Rating: {r.get('rating') or 'n/a'} | Price: {r.get('price') or 'n/a'}"
            f" | {r.get('address') or ''}"
            for i, r in enumerate(results, start=1)
        ]
        return f'Restaurants for "{term}" near {location}:\n' + "\n".join(lines)

    async def get_indexed_restaurants(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        recent = self.directory.list_recent(user_id, DIRECTORY_LISTING_LIMIT)
        return format_directory_listing(recent, len(self.directory.entries(user_id)))

    async def get_polling_status(
        self, app_id: str, user_id: str, channel: str, args: dict,
    ) -> str:
        return self.tracker.debug_report(channel)
