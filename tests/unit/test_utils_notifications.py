from storefront.utils.notifications import DISMISS_AFTER_MS, pop_notification, push_notification

def test_latest_notice_wins_and_is_read_once():
    storage = {}
    push_notification(storage, "first")
    push_notification(storage, "second", "error")
    assert pop_notification(storage) == {"message": "second", "type": "error", "dismissAfterMs": DISMISS_AFTER_MS}
    assert pop_notification(storage) is None
