import click
from flask.cli import with_appcontext

from . import db, bcrypt
from .models import Service, User, Role

DEFAULT_SERVICES = [
    ('Check-up and Consultation', 'General physical examination', 500, 30),
    ('Immunization', 'Core and non-core vaccines', 800, 15),
    ('Anti-parasitic', 'Deworming and parasite control', 400, 15),
    ('Complete Blood Count Testing', 'CBC laboratory test', 900, 30),
    ('Operation (Castration)', 'Surgical neutering', 3500, 120),
    ('Operation (Eye and Ear)', 'Eye and ear surgery', 4000, 120),
    ('Grooming', 'Bath, haircut and nail trim', 600, 60),
]


@click.command('init-db')
@with_appcontext
def init_db():
    db.create_all()
    click.echo('Database initialized.')


@click.command('seed-services')
@with_appcontext
def seed_services():
    added = 0
    for name, description, price, duration in DEFAULT_SERVICES:
        if Service.query.filter_by(name=name).first():
            continue
        db.session.add(Service(name=name, description=description, price=price, duration=duration))
        added += 1
    db.session.commit()
    click.echo(f'Added {added} services.')


@click.command('create-admin')
@click.argument('email')
@click.argument('password')
@click.option('--role', type=click.Choice(['ADMIN', 'VETERINARIAN']), default='ADMIN')
@with_appcontext
def create_admin(email, password, role):
    if User.query.filter_by(email=email).first():
        raise click.ClickException(f'User {email} already exists')
    user = User(
        username=email.split('@')[0],
        email=email,
        password=bcrypt.generate_password_hash(password).decode('utf-8'),
        role=Role[role],
    )
    db.session.add(user)
    db.session.commit()
    click.echo(f'Created {role.lower()} {email}.')


def register_commands(app):
    app.cli.add_command(init_db)
    app.cli.add_command(seed_services)
    app.cli.add_command(create_admin)
