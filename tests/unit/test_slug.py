from app.utils.slug import derive_slug


def test_slug_combines_order_number_and_title():
    assert derive_slug(3, "Photosynthesis Basics") == "3-photosynthesis-basics"

def test_slug_is_url_safe():
    assert derive_slug(12, "  Fractions & Decimals: Part II! ") == "12-fractions-decimals-part-ii"
    assert derive_slug(1, "Árbol de la Vida") == "1-arbol-de-la-vida"
