"""
Tests for ProductRepository against an in-memory database

Author: DP Team
Date: 2025-06-10
"""
from decimal import Decimal

from app.repositories.product_repository import ProductRepository


class TestProductRepository:
    """Test ProductRepository queries"""

    def test_find_all_filters_by_category_and_activity(self, db, make_product, category):
        # Arrange
        in_category = make_product(name="Lab Coat", category=category)
        make_product(name="Stethoscope")
        make_product(name="Old Coat", category=category, is_active=False)

        # Act
        products, total = ProductRepository(db).find_all(category_slug="medical-clothes")

        # Assert
        assert total == 1
        assert [p.id for p in products] == [in_category.id]

    def test_find_all_search_is_case_insensitive(self, db, make_product):
        make_product(name="Premium Scrub Set", description="Antimicrobial fabric")
        make_product(name="Clogs", description="Comfortable SCRUB shoes")
        make_product(name="Thermometer")

        products, total = ProductRepository(db).find_all(search="scrub")

        assert total == 2
        assert {p.name for p in products} == {"Premium Scrub Set", "Clogs"}

    def test_find_all_price_range_and_sort(self, db, make_product):
        make_product(name="A", price="500")
        make_product(name="B", price="1500")
        make_product(name="C", price="3000")

        products, total = ProductRepository(db).find_all(
            min_price=Decimal("600"), max_price=Decimal("5000"), sort="price_desc"
        )

        assert total == 2
        assert [p.name for p in products] == ["C", "B"]

    def test_find_all_paginates_but_counts_everything(self, db, make_product):
        for _ in range(5):
            make_product()

        products, total = ProductRepository(db).find_all(limit=2, offset=2)

        assert total == 5
        assert len(products) == 2

    def test_find_by_slug_hides_inactive(self, db, make_product):
        make_product(slug="hidden-coat", is_active=False)
        repo = ProductRepository(db)

        assert repo.find_by_slug("hidden-coat") is None
        assert repo.find_by_slug("hidden-coat", active_only=False) is not None

    def test_find_by_code_matches_barcode_or_sku(self, db, make_product):
        product = make_product(barcode="DP123ABC", sku="SCR-NAVY-M")
        repo = ProductRepository(db)

        assert repo.find_by_code("DP123ABC").id == product.id
        assert repo.find_by_code("SCR-NAVY-M").id == product.id
        assert repo.find_by_code("nope") is None

    def test_suggestions_limits_results(self, db, make_product, category):
        for i in range(8):
            make_product(name=f"Medical Scrub {i}")

        found = ProductRepository(db).suggestions("medical")

        assert len(found["products"]) == 6
        assert [c.slug for c in found["categories"]] == ["medical-clothes"]

    def test_slug_exists_excludes_self(self, db, make_product):
        product = make_product(slug="lab-coat")
        repo = ProductRepository(db)

        assert repo.slug_exists("lab-coat") is True
        assert repo.slug_exists("lab-coat", exclude_id=product.id) is False
