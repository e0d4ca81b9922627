"""
Notifications app for habit notification fan-out and delivery preferences.

This app provides:
- Notification / NotificationRecipient models (one shared record, per-receiver state)
- RecipientSelector for the targeting modes (single, all users, all admins,
  habit category, system, self)
- Preference resolution deciding in-app and email eligibility per user
- DeliveryDispatcher for realtime push (Channels) and email
- NotificationService / NotificationStateService for sending and inbox state
- REST API and a per-user WebSocket stream

Usage:
    from notifications.services import NotificationService

    result = NotificationService.send_to_user(
        requester=user,
        receiver_email="admin@example.com",
        title="Question",
        message="Can you reset my streak?",
    )

    if result.success:
        notification = result.data.notification
"""
