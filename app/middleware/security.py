import re
from datetime import datetime
from typing import Optional

import tldextract
from validators import domain as validate_domain
from validators.utils import ValidationError

CATEGORIES = ('business', 'entertainment', 'general', 'health', 'science', 'sports', 'technology')
SORT_BY = ('relevancy', 'popularity', 'publishedAt')
LANGUAGES = ('ar', 'de', 'en', 'es', 'fr', 'he', 'it', 'nl', 'no', 'pt', 'ru', 'sv', 'zh')

_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# bundled public suffix snapshot only, no network fetch at runtime
_extract = tldextract.TLDExtract(suffix_list_urls=())


class Security:
    """Query parameter validator.

    Every check returns a bool and never raises, so routes decide which
    400 message to send.
    """

    def is_valid_category(self, category: str) -> bool:
        return category in CATEGORIES

    def is_valid_sort_by(self, sort_by: str) -> bool:
        return sort_by in SORT_BY

    def is_valid_language(self, language: str) -> bool:
        return language in LANGUAGES

    def is_valid_date(self, date: str) -> bool:
        # shape first, then reject impossible days like 2024-02-30
        if not date or not _DATE.match(date):
            return False
        try:
            datetime.strptime(date, '%Y-%m-%d')
        except ValueError:
            return False
        return True

    def is_valid_page(self, page: int) -> bool:
        return page >= 1

    def is_valid_page_size(self, size: int) -> bool:
        return 1 <= size <= 100

    def normalize_domains(self, domains: str) -> Optional[str]:
        """Reduce a comma separated `domains` filter to registrable domains.

        Accepts plain domains or URLs ("https://www.bbc.co.uk/news" -> "bbc.co.uk").
        Returns None when any entry is not a domain.
        """
        if not domains or not isinstance(domains, str):
            return None

        cleaned = []
        for raw in domains.split(','):
            raw = raw.strip()
            if not raw:
                continue
            # Reject credentials (user:pass@host)
            if '@' in raw:
                return None
            try:
                extracted = _extract(raw)
            except Exception:
                return None
            if not extracted.domain or not extracted.suffix:
                return None
            full_domain = f"{extracted.domain}.{extracted.suffix}".lower()
            try:
                if validate_domain(full_domain) is not True:
                    return None
            except (ValidationError, UnicodeError):
                return None
            if full_domain not in cleaned:
                cleaned.append(full_domain)

        return ','.join(cleaned) or None
