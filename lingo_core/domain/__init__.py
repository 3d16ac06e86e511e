"""领域层模型与协议。

包含：
- models: Message / SessionStatus / VendorConfig / HttpRequestSpec / FrameResult。
- exceptions: 业务异常类型定义。
"""
