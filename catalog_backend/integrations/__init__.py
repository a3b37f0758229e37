"""
Third-party data provider integrations.
"""
