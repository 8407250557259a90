# Services layer for catalog business logic
