# ABOUTME: Fuel price extraction from the source page
# ABOUTME: Browser rendering, DOM attribute lookup and schema-guided AI extraction

"""
Extraction Layer: Get the raw price from the source page

This layer handles:
- Rendering the client-side page with a real browser engine
- Reading the price attribute off the rendered DOM
- Delegating extraction to an LLM service via a typed schema

Data Flow: Source page → ExtractedValue → core/ orchestrator
"""

# Strategy variants: fuel_price_ingest.extraction.strategies
