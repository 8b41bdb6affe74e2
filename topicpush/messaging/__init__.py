from topicpush.messaging.contracts import MessagingError, MessagingProviderError, TopicMessage, TopicMessenger, TopicSubscriptionResult

__all__ = ["MessagingError", "MessagingProviderError", "TopicMessage", "TopicMessenger", "TopicSubscriptionResult"]
