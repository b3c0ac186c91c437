# import all models so Base.metadata sees every table
from employee_imports.db.models.file_import import FileImport
from employee_imports.db.models.employee import Employee
