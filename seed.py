from decimal import Decimal

from sqlalchemy import select

from main import app
from storefront.extensions import db
from storefront.models import Inventory, Product, Setting

PRODUCTS = [
    ("Ube Cheese Pandesal (dozen)", Decimal("100.00"), "images/products/ube-pandesal.jpg", 40),
    ("Ensaymada", Decimal("45.00"), "images/products/ensaymada.jpg", 60),
    ("Spanish Bread (6 pcs)", Decimal("60.00"), None, 25),
    ("Leche Flan Tub", Decimal("180.00"), "images/products/leche-flan.jpg", 12),
]

with app.app_context():
    for name, price, img_path, stock in PRODUCTS:
        if db.session.scalar(select(Product).where(Product.name == name)):
            continue
        product = Product(name=name, price=price, img_path=img_path)
        product.inventory = Inventory(quantity=stock)
        db.session.add(product)

    staff_email = app.config["STAFF_NOTIFICATION_EMAIL"]
    if Setting.get_value(db.session, "email") is None:
        db.session.add(Setting(key="email", value=staff_email))

    db.session.commit()

print("Seed data loaded successfully!")
