from app import create_app
from extensions import db
from models import User

app = create_app()

def create_user(username, password):
    with app.app_context():
        # Проверка на уникальность логина
        existing_user = User.query.filter_by(username=username).first()
        if existing_user:
            print(f"⚠️  User '{username}' already exists.")
            return

        user = User(username=username)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        print(f"✅ Created user: {username}")

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('username', help='Username')
    parser.add_argument('password', help='Password')

    args = parser.parse_args()
    create_user(args.username, args.password)
