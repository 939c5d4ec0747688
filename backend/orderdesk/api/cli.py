"""Flask CLI commands for schema management and member provisioning."""

from decimal import Decimal

import click
from flask import Flask

from ..database.models import Product, ProductCategory
from ..models.enums import Role
from ..services.exceptions import ValidationError


def register_cli_commands(app: Flask) -> None:
    """Register CLI commands for database management."""

    def services():
        from . import get_services
        return get_services()

    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        services().db.create_tables()
        click.echo("Database tables created successfully!")

    @app.cli.command('seed-db')
    def seed_db():
        """Seed the database with demo categories, products and members."""
        svc = services()

        with svc.db.get_session_context() as session:
            categories = [
                ProductCategory(name='Electronics'),
                ProductCategory(name='Books'),
                ProductCategory(name='Clothing'),
                ProductCategory(name='Home & Garden'),
                ProductCategory(name='Sports'),
            ]
            session.add_all(categories)
            session.flush()
            electronics, books, clothing, home, sports = categories

            products = [
                # Electronics
                Product(name='Laptop Pro 15"', price=Decimal('1299.99'), product_class_id=electronics.id),
                Product(name='Wireless Headphones', price=Decimal('199.99'), product_class_id=electronics.id),
                Product(name='Smartphone X', price=Decimal('899.99'), product_class_id=electronics.id),

                # Books
                Product(name='Python Programming Guide', price=Decimal('39.99'), product_class_id=books.id),
                Product(name='Database Design Principles', price=Decimal('44.99'), product_class_id=books.id),

                # Clothing
                Product(name='Cotton T-Shirt', price=Decimal('19.99'), product_class_id=clothing.id),
                Product(name='Running Shoes', price=Decimal('129.99'), product_class_id=clothing.id),

                # Home & Garden
                Product(name='Coffee Maker Deluxe', price=Decimal('159.99'), product_class_id=home.id),
                Product(name='LED Desk Lamp', price=Decimal('34.99'), product_class_id=home.id),

                # Sports
                Product(name='Yoga Mat Premium', price=Decimal('29.99'), product_class_id=sports.id),
                Product(name='Basketball Official', price=Decimal('24.99'), product_class_id=sports.id),
            ]
            session.add_all(products)

        members = [
            ('admin@example.com', 'Administrator', 'admin123', Role.ADMIN, False),
            ('member@example.com', 'Demo Member', 'member123', Role.USER, True),
        ]
        for email, name, password, role, vip in members:
            try:
                svc.members.create_member(email, name, password, role=role, vip=vip)
            except ValidationError as e:
                click.echo(f"Skipping {email}: {e.message}")

        click.echo("Database seeded successfully!")
        click.echo(f"Created {len(categories)} categories and {len(products)} products.")

    @app.cli.command('reset-db')
    def reset_db():
        """Drop and recreate all tables."""
        db = services().db
        db.drop_tables()
        db.create_tables()
        click.echo("Database reset successfully!")

    @app.cli.command('create-member')
    @click.argument('email')
    @click.argument('name')
    @click.password_option()
    @click.option('--role', type=click.Choice([r.value for r in Role]), default=Role.USER.value)
    @click.option('--vip/--no-vip', default=False)
    def create_member(email, name, password, role, vip):
        """Provision a member with a hashed password."""
        try:
            member = services().members.create_member(email, name, password, role=role, vip=vip)
        except ValidationError as e:
            raise click.ClickException(e.message)
        click.echo(f"Created member {member.id} <{member.email}> as {member.role.value}")
