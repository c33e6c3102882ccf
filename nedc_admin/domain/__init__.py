# Domain layer - entities and page services
