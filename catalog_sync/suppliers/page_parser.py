"""
Product Page Parser

Extracts product information from supplier pages using JSON-LD
structured data (schema.org Product and BreadcrumbList), with the page
<h1> as a fallback for the product name.
"""

import json
from typing import Any, Dict, List

from bs4 import BeautifulSoup


def _types_of(node: Dict[str, Any]) -> List[str]:
    node_type = node.get('@type', [])
    return node_type if isinstance(node_type, list) else [node_type]


class ProductPageParser:
    """
    Parses supplier product pages.

    Usage:
        parser = ProductPageParser()
        soup = BeautifulSoup(html, "lxml")
        data = parser.parse(soup)
        price = parser.extract_price(data)
        category = parser.extract_category(soup, parser.extract_name(data, soup))
    """

    PRODUCT_TYPES = ('Product', 'IndividualProduct', 'ProductModel')

    AVAILABILITY_MAP = {
        'instock': 'В наличии',
        'outofstock': 'Нет в наличии',
        'limitedavailability': 'Мало',
        'preorder': 'Под заказ',
        'backorder': 'Под заказ',
        'soldout': 'Нет в наличии',
        'discontinued': 'Снят с производства',
    }

    _HOME_CRUMBS = {'главная', 'home', 'каталог', 'catalog'}

    def _json_ld_nodes(self, soup: BeautifulSoup) -> List[Dict[str, Any]]:
        """All JSON-LD objects on the page, flattening arrays and @graph."""
        nodes: List[Dict[str, Any]] = []
        for script in soup.find_all('script', type='application/ld+json'):
            if not script.string:
                continue
            try:
                data = json.loads(script.string)
            except json.JSONDecodeError:
                continue

            stack = data if isinstance(data, list) else [data]
            for item in stack:
                if not isinstance(item, dict):
                    continue
                nodes.append(item)
                graph = item.get('@graph')
                if isinstance(graph, list):
                    nodes.extend(g for g in graph if isinstance(g, dict))
        return nodes

    def parse(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """
        Extract the JSON-LD product object from the page.

        Returns:
            Parsed product data, or empty dict if not found
        """
        for node in self._json_ld_nodes(soup):
            if any(t in self.PRODUCT_TYPES for t in _types_of(node)):
                return node
        return {}

    def extract_name(self, data: Dict[str, Any], soup: BeautifulSoup) -> str:
        name = self._clean_text(str(data.get('name', ''))) if data else ''
        if name:
            return name
        h1 = soup.find('h1')
        return self._clean_text(h1.get_text(' ')) if h1 else ''

    def extract_sku(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        for key in ('sku', 'mpn', 'productID'):
            value = data.get(key)
            if value:
                return self._clean_text(str(value))
        return ""

    def extract_brand(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        brand = data.get('brand')
        if isinstance(brand, dict):
            return self._clean_text(brand.get('name', ''))
        if isinstance(brand, str):
            return self._clean_text(brand)
        return ""

    def extract_model(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        model = data.get('model')
        if isinstance(model, dict):
            return self._clean_text(model.get('name', ''))
        if isinstance(model, str):
            return self._clean_text(model)
        return self._clean_text(str(data.get('mpn', '') or ''))

    def _offers(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        offers = data.get('offers', []) if data else []
        if isinstance(offers, dict):
            offers = [offers]
        return [o for o in offers if isinstance(o, dict)]

    def extract_price(self, data: Dict[str, Any]) -> str:
        """Current price as the page states it (e.g. "12990"), or empty string."""
        for offer in self._offers(data):
            price = offer.get('price', offer.get('lowPrice'))
            if price is not None:
                return str(price)
        return ""

    def extract_original_price(self, data: Dict[str, Any]) -> str:
        """Strikethrough/list price from priceSpecification, or empty string."""
        for offer in self._offers(data):
            specs = offer.get('priceSpecification', [])
            if isinstance(specs, dict):
                specs = [specs]
            for spec in specs:
                if not isinstance(spec, dict):
                    continue
                price_type = str(spec.get('priceType', ''))
                if price_type.endswith(('StrikethroughPrice', 'ListPrice')) and spec.get('price') is not None:
                    return str(spec['price'])
        return ""

    def extract_availability(self, data: Dict[str, Any]) -> str:
        for offer in self._offers(data):
            availability = str(offer.get('availability', ''))
            if availability:
                key = availability.rstrip('/').rsplit('/', 1)[-1].lower()
                return self.AVAILABILITY_MAP.get(key, "")
        return ""

    def extract_warranty(self, data: Dict[str, Any]) -> str:
        """Warranty from a WarrantyPromise or an additionalProperty named like warranty."""
        if not data:
            return ""

        warranty = data.get('warranty')
        if isinstance(warranty, str):
            return self._clean_text(warranty)
        if isinstance(warranty, dict):
            duration = warranty.get('durationOfWarranty', {})
            if isinstance(duration, dict) and duration.get('value') is not None:
                unit = duration.get('unitText', '')
                return self._clean_text(f"{duration['value']} {unit}")

        properties = data.get('additionalProperty', [])
        if isinstance(properties, dict):
            properties = [properties]
        for prop in properties:
            if not isinstance(prop, dict):
                continue
            name = str(prop.get('name', '')).lower()
            if 'гарант' in name or 'warranty' in name:
                return self._clean_text(str(prop.get('value', '')))
        return ""

    def extract_image(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        image = data.get('image')
        if isinstance(image, list) and image:
            image = image[0]
        if isinstance(image, dict):
            image = image.get('url') or image.get('contentUrl')
        return str(image) if image else ""

    def extract_description(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        return self._clean_text(str(data.get('description', '') or ''))

    def extract_category(self, soup: BeautifulSoup, product_name: str = "") -> str:
        """
        Deepest breadcrumb that is neither the product itself nor a home link;
        falls back to the product's "category" field ("A > B" -> "B").
        """
        for node in self._json_ld_nodes(soup):
            if 'BreadcrumbList' not in _types_of(node):
                continue
            items = [i for i in node.get('itemListElement', []) if isinstance(i, dict)]
            items.sort(key=lambda i: int(i.get('position', 0) or 0))
            names = [self._crumb_name(i) for i in items]
            names = [
                n for n in names
                if n and n != product_name and n.lower() not in self._HOME_CRUMBS
            ]
            if names:
                return names[-1]

        category = self.parse(soup).get('category')
        if isinstance(category, str) and category.strip():
            return self._clean_text(category.replace('/', '>').split('>')[-1])
        return ""

    def _crumb_name(self, item: Dict[str, Any]) -> str:
        name = item.get('name')
        if not name and isinstance(item.get('item'), dict):
            name = item['item'].get('name')
        return self._clean_text(str(name or ''))

    def _clean_text(self, text: str) -> str:
        """Clean and normalize text."""
        if not text:
            return ""
        return ' '.join(text.split()).strip()
