import logging

from core.config import BASE_URL, LOG_DIR, LOG_LEVEL, REQUEST_TIMEOUT
from core.exceptions import FirebaseError
from core.logging_setup import setup_logging
from storage.firebase import FirebaseClient
from controller.app_controller import AppController
from gui.login_window import LoginWindow
from gui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main():
    log_file = setup_logging(LOG_DIR, LOG_LEVEL)
    logger.info("Join starting (store=%s, log=%s)", BASE_URL, log_file)

    client = FirebaseClient(BASE_URL, timeout=REQUEST_TIMEOUT)
    controller = AppController(client)

    # a session left open by a previous run skips the login window once
    try:
        logged_in = controller.refresh_current_user()
    except FirebaseError as e:
        logger.warning("Could not read current user: %s", e)
        logged_in = False

    while True:
        if not logged_in:
            login = LoginWindow(controller)
            login.mainloop()
            if not login.authenticated:
                break
        ui = MainWindow(controller)
        ui.mainloop()
        if not ui.logged_out:
            break
        logged_in = False
    logger.info("Join closed")


if __name__ == "__main__":
    main()
