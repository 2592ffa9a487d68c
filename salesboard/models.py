from dataclasses import dataclass


@dataclass(frozen=True)
class Transaction:
    id: int
    title: str
    description: str
    price: float
    category: str
    sold: bool
    date_of_sale: str
    image: str

    @classmethod
    def from_row(cls, row) -> "Transaction":
        return cls(
            id=int(row["id"]),
            title=row["title"],
            description=row["description"],
            price=float(row["price"]),
            category=row["category"],
            sold=bool(row["sold"]),
            date_of_sale=row["date_of_sale"],
            image=row["image"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "sold": self.sold,
            "dateOfSale": self.date_of_sale,
            "image": self.image,
        }
