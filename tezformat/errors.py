"""
错误类型

面向用户的提示信息（土耳其语）与技术细节分开保存：
user_message 显示在界面上，detail 只写入日志。
"""

from __future__ import annotations


class TezFormatError(Exception):
    """所有业务错误的基类"""

    user_message: str = "Beklenmeyen bir hata oluştu."

    def __init__(self, detail: str | None = None, *, user_message: str | None = None):
        if user_message is not None:
            self.user_message = user_message
        self.detail = detail or self.user_message
        super().__init__(self.detail)


class InputValidationError(TezFormatError):
    """输入为空，未调用模型即被拒绝"""

    user_message = "Lütfen önce metin giriniz."


class FormatInProgressError(TezFormatError):
    """已有一个格式化请求在执行中"""

    user_message = "Metin şu anda yapılandırılıyor, lütfen bekleyiniz."


class StructuringFailure(TezFormatError):
    """模型调用失败、超时、缺少配置或返回了无法解析的数据"""

    user_message = "Metin düzenlenirken bir hata oluştu. Lütfen tekrar deneyiniz."


class ExportFailure(TezFormatError):
    """Word 文档组装或保存失败"""

    user_message = "Dosya oluşturulurken hata meydana geldi."
