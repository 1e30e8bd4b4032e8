# ABOUTME: Fuel price ingestion pipeline package
# ABOUTME: Scrapes a client-rendered regional fuel price into a provenance-carrying JSON artifact
