__version__ = "1.0.0"
__description__ = "simple_rest : generic CRUD REST resource controllers for Flask and SQLAlchemy"
