import threading

from annotator_core.channel import LatestMessageChannel
from annotator_core.models import ImageRequest


def test_only_latest_message_is_received():
    channel = LatestMessageChannel()
    assert channel.try_recv_latest() is None
    for i in range(3):
        channel.send(ImageRequest(file_path=f"im{i}.png"))
    assert channel.try_recv_latest() == ImageRequest(file_path="im2.png")
    assert channel.try_recv_latest() is None


def test_send_from_other_thread():
    channel = LatestMessageChannel()

    def produce():
        for i in range(100):
            channel.send(i)

    thread = threading.Thread(target=produce)
    thread.start()
    thread.join()
    assert channel.try_recv_latest() == 99
