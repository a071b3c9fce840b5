from chirpy.models.db_storage import DBStorage

# bound to a database by create_app() via storage.reload()
storage = DBStorage()
