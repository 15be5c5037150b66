from app.crud.base import CRUDBase
from app.models.lesson import Lesson  # registers the lesson mappers used by the account relationships
from app.models.user import StudentAccount

class CRUDStudentAccount(CRUDBase[StudentAccount, dict, dict]):
    pass

student = CRUDStudentAccount(StudentAccount)
