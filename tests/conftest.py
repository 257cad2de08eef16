from datetime import datetime, timezone

import pytest

from fundsxml_checker.infrastructure.parsing.fundsxml import parse_fundsxml

SAMPLE_XML = """<FundsXML4 xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <ControlData>
    <UniqueDocumentID>DOC-2024-01-31-001</UniqueDocumentID>
    <DocumentGenerated>2024-02-01T08:00:00Z</DocumentGenerated>
    <ContentDate>2024-01-31</ContentDate>
    <DataSupplier>
      <SystemCountry>AT</SystemCountry>
      <Short>KAG</Short>
      <Name>Sample KAG</Name>
    </DataSupplier>
    <DataOperation>INITIAL</DataOperation>
    <Language>EN</Language>
  </ControlData>
  <Funds>
    <Fund>
      <Identifiers>
        <LEI>529900ABCDEFGHIJKL12</LEI>
      </Identifiers>
      <Names>
        <OfficialName>Sample Balanced Fund</OfficialName>
      </Names>
      <Currency>EUR</Currency>
      <FundStaticData>
        <InceptionDate>2010-05-01</InceptionDate>
      </FundStaticData>
      <FundDynamicData>
        <TotalAssetValues>
          <TotalAssetValue>
            <NavDate>2024-01-31</NavDate>
            <TotalAssetNature>OFFICIAL</TotalAssetNature>
            <TotalNetAssetValue>
              <Amount ccy="EUR">1000000.00</Amount>
              <Amount ccy="USD">1080000.00</Amount>
            </TotalNetAssetValue>
          </TotalAssetValue>
        </TotalAssetValues>
        <Portfolios>
          <Portfolio>
            <NavDate>2024-01-31</NavDate>
            <Positions>
              <Position>
                <UniqueID>EQ_1</UniqueID>
                <Currency>EUR</Currency>
                <TotalValue>
                  <Amount ccy="EUR">600000.00</Amount>
                </TotalValue>
                <TotalPercentage>60.0</TotalPercentage>
                <Exposures>
                  <Exposure>
                    <Type>Equity</Type>
                    <Value>
                      <Amount ccy="EUR">600000.00</Amount>
                    </Value>
                  </Exposure>
                </Exposures>
              </Position>
              <Position>
                <UniqueID>BO_1</UniqueID>
                <Currency>USD</Currency>
                <TotalValue>
                  <Amount ccy="EUR">400000.00</Amount>
                  <Amount ccy="USD">432000.00</Amount>
                </TotalValue>
                <TotalPercentage>40.0</TotalPercentage>
                <FXRates>
                  <FXRate fromCcy="EUR" toCcy="USD" mulDiv="M">1.08</FXRate>
                </FXRates>
              </Position>
            </Positions>
          </Portfolio>
        </Portfolios>
      </FundDynamicData>
      <SingleFund>
        <ShareClasses>
          <ShareClass>
            <Identifiers>
              <ISIN>AT0000A0ABC1</ISIN>
            </Identifiers>
            <Names>
              <OfficialName>Class A</OfficialName>
            </Names>
            <Currency>EUR</Currency>
            <Prices>
              <Price>
                <NavDate>2024-01-31</NavDate>
                <NavPrice>100.00</NavPrice>
              </Price>
            </Prices>
            <TotalAssetValues>
              <TotalAssetValue>
                <NavDate>2024-01-31</NavDate>
                <TotalNetAssetValue>
                  <Amount ccy="EUR">600000.00</Amount>
                </TotalNetAssetValue>
                <SharesOutstanding>6000</SharesOutstanding>
              </TotalAssetValue>
            </TotalAssetValues>
          </ShareClass>
          <ShareClass>
            <Identifiers>
              <ISIN>AT0000A0ABD9</ISIN>
            </Identifiers>
            <Names>
              <OfficialName>Class T</OfficialName>
            </Names>
            <Currency>EUR</Currency>
            <Prices>
              <Price>
                <NavDate>2024-01-31</NavDate>
                <NavPrice>50.00</NavPrice>
              </Price>
            </Prices>
            <TotalAssetValues>
              <TotalAssetValue>
                <NavDate>2024-01-31</NavDate>
                <TotalNetAssetValue>
                  <Amount ccy="EUR">400000.00</Amount>
                </TotalNetAssetValue>
                <SharesOutstanding>8000</SharesOutstanding>
              </TotalAssetValue>
            </TotalAssetValues>
          </ShareClass>
        </ShareClasses>
      </SingleFund>
    </Fund>
  </Funds>
  <AssetMasterData>
    <Asset>
      <UniqueID>EQ_1</UniqueID>
      <Identifiers>
        <ISIN>DE000BAY0017</ISIN>
        <LEI>549300BAYER000000012</LEI>
        <SEDOL>5069211</SEDOL>
        <WKN>BAY001</WKN>
        <Ticker>BAYN</Ticker>
      </Identifiers>
      <Currency>EUR</Currency>
      <Country>DE</Country>
      <Name>Bayer AG</Name>
      <AssetType>EQ</AssetType>
    </Asset>
    <Asset>
      <UniqueID>BO_1</UniqueID>
      <Identifiers>
        <ISIN>US912828Z781</ISIN>
        <LEI>254900USTREASURY0034</LEI>
        <SEDOL>BKT4Z96</SEDOL>
        <WKN>A2R0DJ</WKN>
        <Ticker>T 2.5 01/29</Ticker>
      </Identifiers>
      <Currency>USD</Currency>
      <Country>US</Country>
      <Name>US Treasury 2.5% 2029</Name>
      <AssetType>BO</AssetType>
      <AssetDetails>
        <Bond>
          <IssueDate>2019-01-31</IssueDate>
          <MaturityDate>2029-01-31</MaturityDate>
          <DateFirstCoupon>2019-07-31</DateFirstCoupon>
          <InterestRate>2.5</InterestRate>
          <Issuer>
            <Name>United States Treasury</Name>
          </Issuer>
        </Bond>
      </AssetDetails>
    </Asset>
  </AssetMasterData>
</FundsXML4>
"""

AS_OF = datetime(2024, 2, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_XML


@pytest.fixture
def sample_document():
    return parse_fundsxml(SAMPLE_XML)


@pytest.fixture
def as_of() -> datetime:
    return AS_OF
