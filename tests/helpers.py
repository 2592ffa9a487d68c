from salesboard.models import Transaction


def make_txn(**overrides) -> Transaction:
    fields = {
        "id": 1,
        "title": "Mens Casual Slim Fit",
        "description": "Solid cotton tee for everyday wear",
        "price": 15.99,
        "category": "men's clothing",
        "sold": False,
        "date_of_sale": "2022-03-05T00:00:00.000Z",
        "image": "https://example.com/1.jpg",
    }
    fields.update(overrides)
    return Transaction(**fields)


def seed_record(**overrides) -> dict:
    record = {
        "id": 1,
        "title": "Fjallraven Backpack",
        "description": "Fits 15 inch laptops",
        "price": 329.85,
        "category": "men's clothing",
        "sold": False,
        "dateOfSale": "2021-11-27T20:29:54+05:30",
        "image": "https://example.com/1.jpg",
    }
    record.update(overrides)
    return record
