"""
Content services for the public bilingual pages.
"""
import logging
from typing import Any, Dict, List, Optional

from portal_service.backend import BackendClient, eq
from portal_service.i18n import localized, pick
from portal_service.models.records import ContentType

logger = logging.getLogger(__name__)

# Newest-first ordering column per content table.
ORDER_COLUMNS = {
    ContentType.ARTICLES: "published_at",
    ContentType.JOBS: "posted_at",
    ContentType.MYTHS: "created_at",
}

BILINGUAL_FIELDS = {
    ContentType.ARTICLES: ("title", "content", "category"),
    ContentType.JOBS: ("position", "location", "description"),
    ContentType.MYTHS: ("claim", "explanation"),
}

# Site sections; /health lists articles.
SECTION_CONTENT = {
    "health": ContentType.ARTICLES,
    "jobs": ContentType.JOBS,
    "myths": ContentType.MYTHS,
}

HOME_ITEMS_PER_SECTION = 3


class ContentService:
    """Reads content tables and flattens bilingual columns for one language."""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    def localize(self, content_type: ContentType, record: Dict[str, Any], lang: str) -> Dict[str, Any]:
        fields = BILINGUAL_FIELDS[content_type]
        item = {
            key: value for key, value in record.items()
            if not (key.endswith("_sq") or key.endswith("_en"))
        }
        for field in fields:
            item[field] = localized(record, field, lang)
        return item

    def list_items(self, content_type: ContentType, lang: str,
                   limit: Optional[int] = None) -> List[Dict[str, Any]]:
        rows = self.backend.select(
            content_type.value, order=ORDER_COLUMNS[content_type], descending=True, limit=limit,
        )
        return [self.localize(content_type, row, lang) for row in rows]

    def get_item(self, content_type: ContentType, item_id: str, lang: str) -> Optional[Dict[str, Any]]:
        row = self.backend.select_one(content_type.value, [eq("id", item_id)])
        if row is None:
            return None
        return self.localize(content_type, row, lang)

    def home(self, lang: str) -> Dict[str, Any]:
        return {
            "title": "Ndrysho",
            "sections": {
                section: {
                    "latest": self.list_items(content_type, lang, limit=HOME_ITEMS_PER_SECTION),
                }
                for section, content_type in SECTION_CONTENT.items()
            },
        }

    def about(self, lang: str) -> Dict[str, Any]:
        return {
            "title": pick("Rreth Ndrysho", "About Ndrysho", lang),
            "offer": pick("Çfarë ofrojmë?", "What do we offer?", lang),
            "sections": [
                pick("Mundësi Pune", "Job Opportunities", lang),
                pick("Shëndet & Ushqim", "Health & Nutrition", lang),
                pick("Mit apo E Vërtetë?", "Myth or Truth?", lang),
            ],
        }

    def contact(self, lang: str) -> Dict[str, Any]:
        return {
            "title": pick("Na Kontaktoni", "Contact Us", lang),
            "email": "ndysho6@gmail.com",
            "instagram": "@ndrysho_portal",
            "businesses": pick(
                "Nëse jeni biznes dhe dëshironi të postoni një mundësi pune, na kontaktoni përmes email ose mediave sociale.",
                "If you are a business and would like to post a job opportunity, contact us via email or social media.",
                lang,
            ),
        }

    def login_page(self, lang: str) -> Dict[str, Any]:
        return {
            "title": pick("Paneli i Administratorit", "Admin Panel", lang),
            "description": pick("Identifikohu për të vazhduar", "Login to continue", lang),
            "action": "/auth/login",
            "fields": ["email", "password"],
        }
