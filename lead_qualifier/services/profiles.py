"""
Customer profile - the qualification thresholds a remodeling company sets.
"""

from dataclasses import dataclass

from lead_qualifier.db.models import Customer


@dataclass(frozen=True)
class CustomerProfile:
    customer_id: str
    company_name: str
    contact_email: str | None
    service_areas: str  # Comma-separated zip prefixes, e.g. "90210" or "902,913"
    minimum_budget: int
    timeline_threshold: int  # Months

    @property
    def primary_service_area(self) -> str:
        """First comma-separated service-area prefix (the only one used for matching)."""
        return self.service_areas.split(",")[0].strip()

    @classmethod
    def from_model(cls, customer: Customer) -> "CustomerProfile":
        return cls(
            customer_id=customer.customer_id,
            company_name=customer.company_name,
            contact_email=customer.contact_email,
            service_areas=customer.service_areas or "",
            minimum_budget=customer.minimum_budget,
            timeline_threshold=customer.timeline_threshold,
        )


@dataclass(frozen=True)
class ProfileDefaults:
    """Thresholds applied when a conversation references an unknown customer."""

    company_name: str = "Elite Remodeling"
    service_areas: str = "90210"
    minimum_budget: int = 75000
    timeline_threshold: int = 12

    @classmethod
    def from_settings(cls, settings) -> "ProfileDefaults":
        return cls(
            company_name=settings.default_company_name,
            service_areas=settings.default_service_areas,
            minimum_budget=settings.default_minimum_budget,
            timeline_threshold=settings.default_timeline_threshold,
        )

    def profile_for(self, customer_id: str) -> CustomerProfile:
        # No contact email: a default-profile lead cannot be delivered anywhere
        return CustomerProfile(
            customer_id=customer_id,
            company_name=self.company_name,
            contact_email=None,
            service_areas=self.service_areas,
            minimum_budget=self.minimum_budget,
            timeline_threshold=self.timeline_threshold,
        )
