"""Key options accepted by the `pressKey` action."""

from spectra.models import SchemaModel
from spectra.names import CatalogKey  # noqa: TC001


class KeyOption(SchemaModel):
    """Catalog entry describing one pressable key."""

    value: CatalogKey
    label: str


KEY_OPTIONS: tuple[KeyOption, ...] = (
    KeyOption(value='Enter', label='Enter'),
    KeyOption(value='Tab', label='Tab'),
    KeyOption(value='Escape', label='Escape'),
    KeyOption(value='Backspace', label='Backspace'),
    KeyOption(value='Delete', label='Delete'),
    KeyOption(value='ArrowUp', label='Arrow Up'),
    KeyOption(value='ArrowDown', label='Arrow Down'),
    KeyOption(value='ArrowLeft', label='Arrow Left'),
    KeyOption(value='ArrowRight', label='Arrow Right'),
    KeyOption(value='Space', label='Space'),
)
