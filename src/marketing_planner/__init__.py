"""marketing-planner - plans, reusable templates, activities and messaging."""

__version__ = "0.3.0"
