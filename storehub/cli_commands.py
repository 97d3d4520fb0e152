"""
Flask CLI commands for discount management.

Commands:
- flask init-db: Create the database tables
- flask discount-types: List registered discount types
- flask active-discounts: List discounts active right now, in evaluation order
- flask reprice-cart CART_ID: Run the discount pipeline over a cart
"""

import click
from storehub.database import get_session, create_schema
from storehub.exceptions import StoreHubError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables."""
        create_schema()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('discount-types')
    def discount_types():
        """List the registered discount types."""
        from storehub.services.discount_service import get_discount_types

        for discount_type in get_discount_types():
            click.echo(f"{discount_type['tag']:<20} {discount_type['name']}")

    @app.cli.command('active-discounts')
    def active_discounts():
        """List the discounts active now, in the order they are applied."""
        from storehub.services.discount_service import get_active_discounts

        discounts = get_active_discounts(get_session())
        if not discounts:
            click.echo('No active discounts.')
            return
        for discount in discounts:
            click.echo(f"{discount.priority:>4}  {discount.handle:<30} {discount.type}")

    @app.cli.command('reprice-cart')
    @click.argument('cart_id', type=int)
    @click.option('--persist', is_flag=True, default=False, help='Commit the new line totals')
    def reprice_cart_command(cart_id, persist):
        """Apply the active discounts to every line of a cart."""
        from storehub.services.cart_service import reprice_cart

        db_session = get_session()
        try:
            totals = reprice_cart(db_session, cart_id)
        except StoreHubError as e:
            db_session.rollback()
            click.echo(click.style(f'Error: {e.message}', fg='red'))
            raise SystemExit(1)

        for line in totals['lines']:
            applied = ', '.join(d['handle'] for d in line['discounts']) or '-'
            click.echo(
                f"#{line['line_id']} {line['product_name']} x{line['quantity']}: "
                f"{line['sub_total']} - {line['discount_total']} = {line['total']}  [{applied}]"
            )
        click.echo(f"Subtotal: {totals['sub_total']}")
        click.echo(f"Discounts: {totals['discount_total']}")
        click.echo(click.style(f"Total: {totals['total']}", bold=True))

        if persist:
            db_session.commit()
            click.echo(click.style('Line totals saved.', fg='green'))
        else:
            db_session.rollback()
