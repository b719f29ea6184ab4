"""Order payloads and their plain-text summaries."""

from pydantic import BaseModel, field_validator, model_validator

from shared_types import Kitchen


class Preorder(BaseModel):
    customer: str
    items: str
    paid: str
    phone: str = ""
    pickup: str = ""
    submitted_by: str = ""

    def describe(self, order_id: str) -> str:
        lines = [f"Order ID: {order_id}", f"Customer: {self.customer}"]
        if self.phone:
            lines.append(f"Phone: {self.phone}")
        if self.pickup:
            lines.append(f"Pickup: {self.pickup}")
        lines.append(f"Payment: {self.paid}")
        lines.append("")
        lines.append(f"Items:\n{self.items}")
        return "\n".join(lines)

    def title(self, order_id: str) -> str:
        return f"📦 PRE-ORDER: {self.customer} ({order_id})"


class WholesaleOrder(BaseModel):
    business: str
    kitchen: Kitchen
    delivery: str
    items: str = ""
    items_tova: str = ""
    items_lumiere: str = ""
    notes: str = ""
    submitted_by: str = ""

    @field_validator("business")
    @classmethod
    def upper_business(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def check_items(self):
        if self.kitchen == Kitchen.BOTH:
            if not (self.items_tova and self.items_lumiere):
                raise ValueError("BOTH kitchen orders need items for TOVA and LUMIERE")
        elif not self.items:
            raise ValueError("Wholesale order needs items")
        return self

    def describe(self, order_id: str) -> str:
        lines = [
            f"Order ID: {order_id}",
            f"Business: {self.business}",
            f"Kitchen: {self.kitchen}",
            f"Delivery: {self.delivery}",
            "",
            "Items:",
        ]
        if self.kitchen == Kitchen.BOTH:
            lines.append(f"TOVA:\n{self.items_tova}\n\nLUMIERE:\n{self.items_lumiere}")
        else:
            lines.append(self.items)
        if self.notes:
            lines.append(f"\nNotes: {self.notes}")
        return "\n".join(lines)

    def title(self, order_id: str) -> str:
        return f"🏷️ WHOLESALE: {self.business} ({order_id})"
