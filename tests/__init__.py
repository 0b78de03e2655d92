# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the GiftFeed API:
# - fakes.py: In-memory repository, object store and placeholder generator
# - test_validation.py / test_visibility.py: Content rules and message redaction
# - test_gift_service.py: The submission pipeline and its compensation
# - test_gift_routes.py: HTTP endpoints through TestClient
# - test_gift_repository.py / test_storage_service.py: Supabase adapters (mocked)
# - test_placeholder.py: Blur placeholder generation
# - test_gift_client.py / test_cache.py: API client and its cache
#
# Run tests with: poetry run pytest
# =============================================================================
