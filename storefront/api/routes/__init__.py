# Catalog routes
