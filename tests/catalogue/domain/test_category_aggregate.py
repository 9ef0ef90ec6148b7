from storefront.catalogue.category import Category, slugify
from storefront.catalogue.events import CategoryCreated


class TestSlugify:
    def test_lowercases_and_hyphenates(self):
        assert slugify("Hot Sauces & Salsas") == "hot-sauces-salsas"

    def test_trims_separators(self):
        assert slugify("  Gift Boxes!  ") == "gift-boxes"


class TestCategoryCreation:
    def test_create(self):
        category = Category.create(name="Hot Sauces", description="Bottled heat")

        assert category.slug == "hot-sauces"
        assert category.is_active is True
        assert isinstance(category._events[-1], CategoryCreated)
