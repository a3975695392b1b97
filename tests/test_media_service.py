import asyncio

from conftest import FakeYouTubeService, make_candidate
from cookmate.models.video import SearchLinkFallback
from cookmate.services.media_service import (
    SuggestionEnricher,
    generate_fallback_image,
    generate_image_link,
)
from cookmate.services.video_selector import VideoSelector


def _suggestion(name, youtube=None, image=None):
    return {
        "name": name,
        "description": "Tasty",
        "searchTerms": {"youtube": youtube or f"{name} recipe", "image": image or name},
    }


def test_image_links_are_deterministic():
    assert generate_image_link("Masala  Dosa") == "https://source.unsplash.com/800x600/?masala-dosa,food"
    assert (
        generate_fallback_image("Paneer Tikka")
        == "https://via.placeholder.com/800x600/FF6B6B/FFFFFF?text=paneer-tikka"
    )


def test_non_ascii_names_are_url_encoded():
    assert generate_fallback_image("ರಾಗಿ ಮುದ್ದೆ").startswith(
        "https://via.placeholder.com/800x600/FF6B6B/FFFFFF?text=%E0%B2"
    )


def test_enrich_attaches_media_and_meal_type(fixed_clock):
    youtube = FakeYouTubeService({"en": [make_candidate("vid", locale="en")]})
    enricher = SuggestionEnricher(VideoSelector(youtube, clock=fixed_clock))

    enriched = enricher.enrich(_suggestion("Upma", image="semolina upma"), "English", "breakfast")

    assert enriched["meal_type"] == "breakfast"
    assert enriched["name"] == "Upma"
    media = enriched["media"]
    assert media["youtube_video"]["type"] == "direct_video"
    assert media["youtube_video"]["video_id"] == "vid"
    assert media["image_url"] == "https://source.unsplash.com/800x600/?semolina-upma,food"
    assert media["fallback_image"].endswith("text=upma")
    assert youtube.calls[0][0] == "Upma recipe recipe cooking"


def test_enrich_without_search_terms_uses_dish_name(fixed_clock):
    youtube = FakeYouTubeService(configured=False)
    enricher = SuggestionEnricher(VideoSelector(youtube, clock=fixed_clock))

    enriched = enricher.enrich({"name": "Khichdi"}, "Hindi", "dinner")

    video = enriched["media"]["youtube_video"]
    assert video["type"] == "search_link"
    assert video["title"] == "Search: Khichdi recipe"
    assert enriched["media"]["image_url"].endswith("?khichdi,food")


class _ExplodingSelector:
    def select(self, query, deadline=None):
        raise RuntimeError("selector crashed")


def test_enrich_keeps_suggestion_when_selector_crashes():
    enricher = SuggestionEnricher(_ExplodingSelector())

    enriched = enricher.enrich(_suggestion("Idli"), "Tamil", "breakfast")

    assert enriched["name"] == "Idli"
    assert enriched["enrichment_error"] == "enrichment failed"
    assert enriched["media"]["youtube_video"]["type"] == "search_link"
    assert enriched["media"]["youtube_video"]["error"] == "selector crashed"


class _FallbackSelector:
    def select(self, query, deadline=None):
        return SearchLinkFallback.for_query(query, reason="no suitable videos found")


def test_enrich_all_preserves_order():
    enricher = SuggestionEnricher(_FallbackSelector())
    suggestions = [_suggestion(name) for name in ("Poha", "Upma", "Dosa")]

    enriched = asyncio.run(enricher.enrich_all(suggestions, "English", "breakfast"))

    assert [item["name"] for item in enriched] == ["Poha", "Upma", "Dosa"]
    assert all(item["meal_type"] == "breakfast" for item in enriched)
