"""Route blueprints for the order desk API."""
