"""
Catalog backend: mirrors TMDb movie metadata into the local `catalog` schema.
"""
