from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.catalog.models import Category, HeroImage, Product

CATEGORIES = [
    # (name, slug, image hint, display order)
    ("Sparklers", "sparklers", "sparkler light", 1),
    ("Rockets", "rockets", "rocket launch", 2),
    ("Fountains", "fountains", "fountain sparks", 3),
    ("Party Poppers", "party-poppers", "confetti popper", 4),
    ("Gift Boxes", "gift-boxes", "gift box", 99),
]

PRODUCTS = [
    # (name, category slug, price, stock, rating)
    ("Golden Sparkler Pack", "sparklers", Decimal("4.99"), 250, Decimal("4.5")),
    ("Colour Sparklers (10 pcs)", "sparklers", Decimal("6.50"), 180, Decimal("4.2")),
    ("Sky Whistler Rocket", "rockets", Decimal("12.00"), 60, Decimal("4.7")),
    ("Thunder Rocket Set", "rockets", Decimal("24.99"), 35, Decimal("4.8")),
    ("Silver Rain Fountain", "fountains", Decimal("9.75"), 90, Decimal("4.1")),
    ("Volcano Fountain", "fountains", Decimal("15.00"), None, None),
    ("Confetti Poppers (6 pcs)", "party-poppers", Decimal("3.99"), 400, Decimal("4.0")),
    ("Celebration Gift Box", "gift-boxes", Decimal("49.99"), 20, Decimal("4.9")),
]

HERO_IMAGES = [
    # (alt text, image hint, display order, active, link)
    ("New Year's Eve collection", "night fireworks", 1, True, "/categories/rockets"),
    ("Sparklers for every party", "sparkler hands", 2, True, "/categories/sparklers"),
    ("Summer sale (ended)", "summer sky", 3, False, ""),
]

PLACEHOLDER_IMAGE = "https://placehold.co/600x400.png"


class Command(BaseCommand):
    help = "Seed the catalog (categories, products, hero images) and demo users."

    def handle(self, *args, **options):
        self.stdout.write("Seeding storefront data...")

        # all-or-nothing: a failure leaves the catalog untouched
        with transaction.atomic():
            users_created = self._seed_users()
            categories = self._seed_categories()
            products = self._seed_products(categories)
            heroes = self._seed_hero_images()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"categories={len(categories)}, "
                f"products={len(products)}, "
                f"hero_images={len(heroes)}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="shopper").exists():
            User.objects.create_user(
                "shopper", email="shopper@example.com", password="shopper123"
            )
            created += 1
        return created

    def _seed_categories(self) -> dict[str, Category]:
        categories: dict[str, Category] = {}
        for name, slug, hint, order in CATEGORIES:
            category, _ = Category.objects.get_or_create(
                slug=slug,
                defaults={
                    "name": name,
                    "image_url": PLACEHOLDER_IMAGE,
                    "image_hint": hint,
                    "display_order": order,
                },
            )
            categories[slug] = category
        return categories

    def _seed_products(self, categories: dict[str, Category]) -> list[Product]:
        products: list[Product] = []
        for name, slug, price, stock, rating in PRODUCTS:
            product, _ = Product.objects.get_or_create(
                name=name,
                category=categories[slug],
                defaults={
                    "description": f"{name} from the {categories[slug].name} range.",
                    "price": price,
                    "image_url": PLACEHOLDER_IMAGE,
                    "image_hint": slug.replace("-", " "),
                    "stock": stock,
                    "rating": rating,
                },
            )
            products.append(product)
        return products

    def _seed_hero_images(self) -> list[HeroImage]:
        heroes: list[HeroImage] = []
        for alt, hint, order, active, link in HERO_IMAGES:
            hero, _ = HeroImage.objects.get_or_create(
                alt_text=alt,
                defaults={
                    "image_url": PLACEHOLDER_IMAGE,
                    "image_hint": hint,
                    "display_order": order,
                    "is_active": active,
                    "link_url": link,
                },
            )
            heroes.append(hero)
        return heroes
