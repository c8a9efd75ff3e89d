from typing import Dict, Iterable, Mapping, Optional
from config import settings

class OwnerResolver:
    """Maps an order's categories to the person responsible for it"""
    
    def __init__(self, category_owners: Mapping[str, str], default_owner: str):
        self.category_owners: Dict[str, str] = dict(category_owners)
        self.default_owner = default_owner
        # Owners in configuration order; first owner with a matching category wins
        self._owners = list(dict.fromkeys(self.category_owners.values()))
    
    @classmethod
    def from_settings(cls) -> "OwnerResolver":
        return cls(settings.category_owners, settings.default_owner)
    
    def resolve(self, categories: Optional[Iterable[str]]) -> str:
        """
        Owner for a set of categories. Independent of category order;
        empty or unmapped input yields the default owner.
        """
        mapped = {self.category_owners[c] for c in (categories or []) if c in self.category_owners}
        for owner in self._owners:
            if owner in mapped:
                return owner
        return self.default_owner

def get_owner_resolver() -> OwnerResolver:
    """Dependency that provides the configured owner resolver"""
    return OwnerResolver.from_settings()
