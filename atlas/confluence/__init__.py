from atlas.confluence.cleanup import CleanupRules, clean_binary_data, clean_metadata

__all__ = ["CleanupRules", "clean_binary_data", "clean_metadata"]
