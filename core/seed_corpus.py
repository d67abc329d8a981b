# core/seed_corpus.py
from typing import Final

SEED_FILENAME: Final[str] = "annual-report-2024-sustainability.txt"

# Bundled excerpt used to bootstrap an empty corpus.
SEED_REPORT: Final[str] = """Annual Report 2024 - Environmental Sustainability

Our Commitment to Environmental Responsibility
We are committed to responsible environmental stewardship. Our sustainability work focuses on reducing our environmental footprint across operations while continuing to deliver products consumers trust.

Climate Action
We have set science-based targets to reduce greenhouse gas emissions across our operations and supply chain. Manufacturing sites are increasingly powered by renewable electricity, with solar and wind installations at key plants.

Packaging Innovation
We are advancing packaging solutions such as concentrated formulas that reduce packaging material and transportation impact. A growing share of our packaging is recyclable and made with post-consumer recycled plastic.

Water Stewardship
Water conservation is critical to our operations and to the communities we serve. We use water-efficient manufacturing processes and support watershed protection programs in water-stressed regions.

Ingredient Transparency
We publish detailed ingredient information for our products and source materials responsibly. Our research includes biodegradable formulations designed to minimize environmental impact after use.

Supply Chain Sustainability
We work with suppliers on responsible sourcing, including certified palm oil, responsibly managed forests, and fair labor practices throughout the supply chain.

Community Impact
Our environmental programs extend to local communities through clean water access programs, environmental education, and disaster relief.

Performance Metrics
- 50% reduction in greenhouse gas emissions from operations by 2030
- 100% recyclable or reusable packaging by 2030
- 35% reduction in water usage per unit of production
- Zero manufacturing waste to landfill at 95% of our sites
"""
