from topicpush.subscription.trigger import SUBSCRIBED_MESSAGE, SubscriptionOutcome, SubscriptionTrigger

__all__ = ["SUBSCRIBED_MESSAGE", "SubscriptionOutcome", "SubscriptionTrigger"]
