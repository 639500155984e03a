"""
Background low stock monitoring script using APScheduler.
Runs periodically to find products at or below their minimum stock and
send an email alert.
"""

import logging
import time

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from dotenv import load_dotenv

from config import get_settings
from db_engine import init_db
from services.inventory import InventoryService
from services.notification import EmailService

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def check_low_stock_alerts() -> int:
    """
    Main job function to check all products for low stock.
    Called by the scheduler at the configured interval.

    Returns:
        Number of products at or below their minimum stock
    """
    logger.info("Starting low stock check...")

    low_stock = InventoryService.get_low_stock_products()
    if not low_stock:
        logger.info("All products are above their minimum stock.")
        return 0

    stock_levels = InventoryService.get_stock_levels()
    items = []
    for product in low_stock:
        stock = stock_levels.get(product.id, 0.0)
        logger.warning(
            f"LOW STOCK: {product.name} ({product.sku}) has {stock:g} units "
            f"(minimum {product.min_stock:g})"
        )
        items.append({
            'name': product.name,
            'sku': product.sku,
            'stock': stock,
            'min_stock': product.min_stock,
        })

    settings = get_settings()
    if not settings.alert_email:
        logger.warning("No alert email configured. Skipping low stock email.")
    else:
        email_service = EmailService()
        if email_service.send_low_stock_alert(settings.alert_email, items):
            logger.info(f"Low stock alert sent to {settings.alert_email}")

    logger.info(f"Low stock check complete. Products below minimum: {len(items)}")
    return len(items)


def start_monitor_scheduler():
    """
    Start the background scheduler for low stock monitoring.
    Runs once immediately, then every low_stock_check_interval_minutes.
    """
    settings = get_settings()
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        check_low_stock_alerts,
        trigger=IntervalTrigger(minutes=settings.low_stock_check_interval_minutes),
        id='low_stock_check',
        name='Low Stock Check',
        replace_existing=True
    )

    logger.info("Running initial low stock check on startup...")
    check_low_stock_alerts()

    scheduler.start()
    logger.info(
        f"Low stock monitor started. Running every {settings.low_stock_check_interval_minutes} minutes."
    )

    return scheduler


def run_one_time_check() -> int:
    """Run a single low stock check."""
    logger.info("Running one-time low stock check...")
    return check_low_stock_alerts()


if __name__ == "__main__":
    import sys

    init_db()

    if len(sys.argv) > 1 and sys.argv[1] == "--once":
        run_one_time_check()
    else:
        scheduler = start_monitor_scheduler()
        try:
            print("\n" + "=" * 60)
            print("InventoryTracker Low Stock Monitor is running...")
            print("Press Ctrl+C to stop.")
            print("=" * 60 + "\n")

            while True:
                time.sleep(1)

        except (KeyboardInterrupt, SystemExit):
            logger.info("Shutting down low stock monitor...")
            scheduler.shutdown()
            logger.info("Low stock monitor stopped.")
