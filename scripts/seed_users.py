from hostel_leave.database import SessionLocal, init_db
from hostel_leave.models.user import User, UserRole
from hostel_leave.services.integrity import ReferentialIntegrityService

init_db()
db = SessionLocal()

def create_user(email, first_name, role, room_number=None):
    # Check if user already exists to avoid unique constraint errors
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        print(f"User {email} already exists. Skipping.")
        return existing_user

    user = User(
        email=email,
        first_name=first_name,
        last_name="Demo",
        role=role,
        room_number=room_number,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"Created {role.value} -> {email} (id={user.id})")
    return user

admin = create_user("admin@hostel.example", "Asha", UserRole.ADMIN)
staff = create_user("warden@hostel.example", "Ravi", UserRole.STAFF)
parent = create_user("parent@hostel.example", "Meera", UserRole.PARENT)
student = create_user("student@hostel.example", "Arjun", UserRole.STUDENT, room_number="B-12")

if student.parent_id is None:
    ReferentialIntegrityService(db).assign_parent(student.id, parent.id)
    print(f"Linked student {student.id} to parent {parent.id}")

db.close()
