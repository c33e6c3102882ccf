# Web layer - FastAPI routes, forms and session auth
