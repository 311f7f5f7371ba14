from .routes import projects_public_bp

__all__ = ['projects_public_bp']
