"""User selection synchronized with the addressable location.

Two one-directional passes, ordered so they never feed back into each other:

1. restore() reads ``from``, ``to`` and ``receive`` once at startup and
   overrides each default whose value is allowed for that field. Anything
   else is ignored.
2. Every later change to the asset triple writes all three back to the
   location as one in-place replace.

The send amount lives only in memory; it is not part of the location.
"""

import dataclasses
from typing import Any

from ratefeed.exceptions import UnknownAssetError
from ratefeed.logging import get_logger
from ratefeed.models import ALL_ASSETS, RECEIVE_ASSETS, Asset, Selection
from ratefeed.pricing.rate_calculator import sanitize_amount
from ratefeed.selection.location import LocationStore

logger = get_logger(__name__)

# query parameter -> (Selection field, allowed assets)
_LOCATION_FIELDS: dict[str, tuple[str, frozenset[Asset]]] = {
    "from": ("from_asset", ALL_ASSETS),
    "to": ("to_asset", ALL_ASSETS),
    "receive": ("receive_asset", RECEIVE_ASSETS),
}


class SelectionState:
    """Holds the current Selection and mirrors asset changes into a location.

    Args:
        location: Store the asset triple is restored from and mirrored to.
        defaults: Starting selection before restore.
    """

    def __init__(self, location: LocationStore, defaults: Selection | None = None) -> None:
        self._location = location
        self._current = defaults if defaults is not None else Selection()
        self._restored = False

    @property
    def current(self) -> Selection:
        return self._current

    def restore(self) -> Selection:
        """Apply allowed asset codes from the location, once.

        Does not write back to the location.
        """
        if self._restored:
            logger.warning("selection_restore_repeated")
            return self._current
        self._restored = True

        params = self._location.read_all()
        changes: dict[str, Asset] = {}
        for key, (field_name, allowed) in _LOCATION_FIELDS.items():
            raw = params.get(key)
            if raw is None:
                continue
            try:
                changes[field_name] = Asset.parse(raw, allowed)
            except UnknownAssetError:
                logger.info("invalid_restore_parameter", param=key, value=raw)

        if changes:
            self._current = dataclasses.replace(self._current, **changes)
        logger.debug("selection_restored", **self._current.location_params())
        return self._current

    def set_from_asset(self, asset: Asset | str) -> Selection:
        return self._apply(from_asset=Asset.parse(asset))

    def set_to_asset(self, asset: Asset | str) -> Selection:
        return self._apply(to_asset=Asset.parse(asset))

    def set_receive_asset(self, asset: Asset | str) -> Selection:
        """Change the calculator's receive asset (ETH or BTC only)."""
        return self._apply(receive_asset=Asset.parse(asset, RECEIVE_ASSETS))

    def set_send_amount_usd(self, amount: Any) -> Selection:
        """Change the USD amount; invalid input is stored as zero."""
        return self._apply(send_amount_usd=sanitize_amount(amount))

    def swap_assets(self) -> Selection:
        """Exchange the from and to assets in a single transition."""
        current = self._current
        return self._apply(from_asset=current.to_asset, to_asset=current.from_asset)

    def _apply(self, **changes: Any) -> Selection:
        previous = self._current
        self._current = dataclasses.replace(previous, **changes)
        if self._current.location_params() != previous.location_params():
            self._location.write_all(self._current.location_params())
        return self._current
